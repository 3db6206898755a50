from .parsing import strip_code_fences, parse_model_output

__all__ = [
    "strip_code_fences",
    "parse_model_output",
]
