"""actdiary: ACT diary coaching backend with deduplicated async LLM jobs."""

__version__ = "0.1.0"
