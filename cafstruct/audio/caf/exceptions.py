'''
Errors raised while parsing a CAF file.

Whatever the kind, the first violation aborts the whole parse: there is no
partially parsed file to recover.
'''
from ...exceptions import CafstructException


class CAFException(CafstructException):

    def __init__(self, message):
        super().__init__(chain=[], message=message)


class CAFHeaderException(CAFException):
    '''The preamble of the file is not the one of a CAF file we can read.'''
    pass


class InvalidFileType(CAFHeaderException):

    def __init__(self, file_type):
        self.file_type = file_type
        super().__init__(f'file type is {file_type!r} instead of b\'caff\'')


class UnsupportedFileVersion(CAFHeaderException):

    def __init__(self, file_version):
        self.file_version = file_version
        super().__init__(f'file version {file_version} is not supported')


class InvalidFileFlags(CAFHeaderException):

    def __init__(self, file_flags, file_version):
        self.file_flags = file_flags
        self.file_version = file_version
        super().__init__(f'file flags must be 0 for version {file_version}, found {file_flags:#06x}')


class CAFChunkException(CAFException):
    '''A single chunk can't be decoded.'''
    pass


class UnexpectedChunkSize(CAFChunkException):

    def __init__(self, actual, expected_type, expected):
        self.actual = actual
        self.expected_type = expected_type
        self.expected = expected
        super().__init__(f'chunk {expected_type.value!r} must be {expected} bytes long, found {actual}')


class InvalidChunkSize(CAFChunkException):
    '''Negative sizes other than -1, or -1 for a chunk that is not the audio data.'''

    def __init__(self, chunk_type, size):
        self.chunk_type = chunk_type
        self.size = size
        super().__init__(f'chunk {chunk_type!r} has an invalid size {size}')


class MalformedStringTable(CAFChunkException):

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f'string table should contain {expected} strings, found {actual}')


class UnsupportedChunkType(CAFChunkException):

    def __init__(self, chunk_type):
        self.chunk_type = chunk_type
        super().__init__(f'chunk {chunk_type.value!r} is not supported')


class CAFStructureException(CAFException):
    '''The chunks are fine by themselves but they don't make a valid file together.'''
    pass


class DuplicateChunk(CAFStructureException):

    def __init__(self, chunk_type):
        self.chunk_type = chunk_type
        super().__init__(f'chunk {chunk_type.value!r} can appear only once')


class OutOfOrderChunk(CAFStructureException):

    def __init__(self, chunk_type, found, index):
        self.chunk_type = chunk_type
        self.found = found
        self.index = index
        super().__init__(f'chunk {chunk_type.value!r} must be the first one, found {found!r} at index {index}')


class MissingRequiredChunk(CAFStructureException):

    def __init__(self, chunk_type):
        self.chunk_type = chunk_type
        super().__init__(f'chunk {chunk_type.value!r} is required')
