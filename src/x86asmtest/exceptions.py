"""exceptions

ConfigError is fatal: a curated table is out of sync with the encoder's
namespace.  EncodeError covers a single argument combination and the batch
carries on with the next one.
"""


class ConfigError(RuntimeError):
    pass


class EncodeError(ValueError):
    def __init__(self, reason, index=None):
        self.reason = reason
        self.index = index
        if index is None:
            super().__init__(reason)
        else:
            super().__init__(f"args[{index}] could not be encoded: {reason}")

    def at(self, index):
        """returns a copy of this error attributed to argument `index`"""
        return self.__class__(self.reason, index=index)


class EngineError(EncodeError):
    pass


class SkipCase(Exception):
    """Raise this exception to skip an instruction form.

    The generator logs the reason and records the form as skipped.
    """
