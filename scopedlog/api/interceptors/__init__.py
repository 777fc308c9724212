"""Route-level interceptors."""

from scopedlog.api.interceptors.error_capture import LoggerErrorRoute, attach_error

__all__: list[str] = ["LoggerErrorRoute", "attach_error"]
