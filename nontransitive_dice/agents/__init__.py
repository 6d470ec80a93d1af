"""
Registry of computer opponents for non-transitive dice matches.
Decorate an InputSource subclass with @register_agent("name") to make it selectable from the CLI
and the tournament script. Every module in this package is imported below so the decorators run.
"""

AGENT_MAP = {}

def register_agent(name):
	"""
	Decorator to register an input source class under a given name.
	Usage:
		@register_agent("random")
		class RandomAgent(InputSource): ...
	Raises:
		ValueError: If another class is already registered under name.
	"""
	def decorator(cls):
		existing = AGENT_MAP.get(name)
		if existing is not None and existing is not cls:
			raise ValueError(f"agent name {name!r} is already taken by {existing.__name__}")
		AGENT_MAP[name] = cls
		return cls
	return decorator

def create_agent(name):
	"""
	Instantiate a registered agent by (case-insensitive) name.
	Raises:
		KeyError: If no agent is registered under name.
	"""
	key = name.lower()
	if key not in AGENT_MAP:
		raise KeyError(f"unknown agent {name!r}; supported: {sorted(AGENT_MAP)}")
	return AGENT_MAP[key]()

import importlib
import os
import pkgutil

_this_dir = os.path.dirname(__file__)
for _, modname, ispkg in pkgutil.iter_modules([_this_dir]):
	if not ispkg and modname != "base":
		importlib.import_module(f"{__name__}.{modname}")
