from .memory import InMemoryProjectStore
from .yaml_file import YamlProjectStore

__all__ = ["InMemoryProjectStore", "YamlProjectStore"]
