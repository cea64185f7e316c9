from algo_harness.orchestration.registry import DictPluginRegistry, ImportPluginRegistry

__all__ = ["DictPluginRegistry", "ImportPluginRegistry"]
