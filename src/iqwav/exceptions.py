class IQWavError(Exception):
    pass


class TruncatedInput(IQWavError, ValueError):
    """
    Input buffer is shorter than the fixed capture header
    """

    def __init__(self, size: int, required: int):
        self.size = size
        self.required = required
        super().__init__(f"truncated header: got {size} bytes, need at least {required}")
