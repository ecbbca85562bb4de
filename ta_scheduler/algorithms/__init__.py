# Initialize algorithms package
from . import prng
from . import greedy
from . import validation

__all__ = ['prng', 'greedy', 'validation']
