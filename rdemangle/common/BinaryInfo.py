import hashlib


class BinaryInfo(object):
    """ simple DTO to contain the information a label provider needs about a binary """

    raw_data = b""
    binary_size = 0
    file_path = ""
    sha256 = ""

    def __init__(self, binary):
        self.raw_data = binary
        self.binary_size = len(binary)
        self.sha256 = hashlib.sha256(binary).hexdigest()

    @classmethod
    def fromFile(cls, file_path):
        with open(file_path, "rb") as fin:
            binary_info = cls(fin.read())
        binary_info.file_path = file_path
        return binary_info

    def isElf(self):
        return self.raw_data[:4] == b"\x7fELF"

    def isPe(self):
        return self.raw_data[:2] == b"MZ"
