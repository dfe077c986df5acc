"""
Exceptions for KeyMaster
This is placed such that there is a general error catcher
"""


class KeyMasterError(Exception):
    # general container for errors
    pass


class InvalidKeyFormat(KeyMasterError, ValueError):
    # raised when a hexadecimal key string is malformed
    pass


class KeyRangeError(KeyMasterError, ValueError):
    # raised when a master key is too short to derive an IV from
    pass


class PaddingError(KeyMasterError, ValueError):
    # raised when ISO 10126 padding does not validate
    pass


class InvalidDataError(KeyMasterError, ValueError):
    # raised at the codec boundary; original failure is kept as __cause__
    pass


class InvalidPasswordError(InvalidDataError):
    # raised when a file does not decrypt under the supplied password
    pass
