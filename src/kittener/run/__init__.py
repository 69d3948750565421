from kittener.run.config import Config
from kittener.run.trial  import Trial

__all__ = ['Config', 'Trial']
