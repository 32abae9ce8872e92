from .names import load_common_names
