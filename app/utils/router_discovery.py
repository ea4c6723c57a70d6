import importlib
import pkgutil

from fastapi import APIRouter, FastAPI
from loguru import logger


def discover_routers(package_name: str = "app.api") -> list[APIRouter]:
    """Collect the module-level ``router`` of every module in ``package_name``."""
    package = importlib.import_module(package_name)
    routers: list[APIRouter] = []

    for module_info in pkgutil.iter_modules(package.__path__):
        full_module_name = f"{package_name}.{module_info.name}"
        if module_info.ispkg:
            routers.extend(discover_routers(full_module_name))
            continue

        module = importlib.import_module(full_module_name)
        router = getattr(module, "router", None)
        if isinstance(router, APIRouter):
            routers.append(router)
            logger.debug(f"Discovered router in {full_module_name}")
        else:
            logger.warning(f"{full_module_name} has no router, skipping")

    return routers


def register_routers(app: FastAPI, prefix: str = "/api") -> None:
    for router in discover_routers():
        app.include_router(router, prefix=prefix)
