"""Automatic route registry: every handler module exposing ``router`` is mounted."""
from importlib import import_module
from pkgutil import iter_modules
from pathlib import Path
from fastapi import APIRouter

routers: list[APIRouter] = []

_package_dir = Path(__file__).parent
for mod in sorted(iter_modules([str(_package_dir)]), key=lambda m: m.name):
    if mod.ispkg:
        continue
    module = import_module(f"{__name__}.{mod.name}")
    router = getattr(module, "router", None)
    if isinstance(router, APIRouter):
        routers.append(router)
