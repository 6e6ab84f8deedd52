"""
Run-time environments: a dictionary of bindings with a link to the enclosing frame.

Three policies govern where a write lands:

	LOCAL     -- this frame, always.
	NONLOCAL  -- skip this frame; search upward as for ANY.
	ANY       -- the nearest frame that already binds the name, or else the root.

Lookup walks all the way to the root. A name bound nowhere reads as the absence-value.
"""
from typing import Optional
from .syntax import Expression, ConstantExpression

LOCAL = 'local'
NONLOCAL = 'nonlocal'
ANY = 'any'

class Scope:
	_bindings : dict[str, Expression]
	parent : Optional["Scope"]

	def __init__(self, parent:Optional["Scope"]=None):
		self._bindings = {}
		self.parent = parent

	def __repr__(self):
		return "<Scope %s>" % ', '.join(self._bindings)

	def fetch(self, key:str) -> Expression:
		frame = self
		while frame is not None:
			try: return frame._bindings[key]
			except KeyError: frame = frame.parent
		return ConstantExpression(None)

	def exists(self, key:str, policy:str) -> bool:
		if policy == LOCAL: return key in self._bindings
		if policy == ANY: return key in self._bindings or (self.parent is not None and self.parent.exists(key, ANY))
		if policy == NONLOCAL: return self.parent is not None and self.parent.exists(key, ANY)
		raise ValueError(policy)

	def set(self, key:str, value:Expression, policy:str):
		if policy == LOCAL:
			self._bindings[key] = value
		elif policy == NONLOCAL:
			(self.parent or self).set(key, value, ANY)
		elif policy == ANY:
			frame = self
			while not (frame.exists(key, LOCAL) or frame.parent is None):
				frame = frame.parent
			frame._bindings[key] = value
		else:
			raise ValueError(policy)

	def update(self, pairs):
		""" Bulk LOCAL binding, as for installing the built-ins. """
		self._bindings.update(pairs)

	@property
	def root(self) -> "Scope":
		frame = self
		while frame.parent is not None: frame = frame.parent
		return frame
