from .resources import RESOURCES, CrudResource

__all__ = ["CrudResource", "RESOURCES"]
