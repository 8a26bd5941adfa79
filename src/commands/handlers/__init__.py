from .silencer import SilencerCommand

__all__ = ["SilencerCommand"]
