class HandleStateError(Exception):
    """Raised when a client or output handle is opened while another one is still live."""
    def __init__(self, handle: str):
        self.handle = handle
        super().__init__(f"a {handle} handle is already open")
