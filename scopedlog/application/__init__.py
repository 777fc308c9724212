"""Application layer: the logging facades, the registry and the context carrier."""
