"""
# Cafstruct: reading Core Audio Format files.

A file format is described declaratively, as a Chunk containing fields and
sub-chunks in the order they appear in the binary data

    class Header(Chunk):
        file_type    = fields.StringField(4)
        file_version = fields.StructField('H', endianess=Endianess.BIG_ENDIAN)

and the only operation defined on it is unpack(): reading the binary data
from a stream and building the high-level representation of it. Usually
when unpacking the offset is the actual offset of the stream and the chunk
itself knows how many bytes it needs to read.

A field can depend on the value of another one (see properties.Dependency),
so that for example the number of elements of an array is read from a
counter preceding it.

An instance representing a chunk is in one of the following states

 1. INIT
 2. UNPACKING
 3. DONE

The CAF format itself lives in cafstruct.audio.caf.
"""
