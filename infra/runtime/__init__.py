from .system_clock import SystemClock
from .uuid_id_generator import UuidIdGenerator
from .structured_logger import StructuredLogger

__all__ = ["SystemClock", "UuidIdGenerator", "StructuredLogger"]
