"""dBASE III table format constants, markers, and sizes."""

# Fixed region sizes
HEADER_SIZE = 32            # File header prefix
DESCRIPTOR_SIZE = 32        # One field descriptor
FIELD_NAME_SIZE = 11        # Space-padded field name
TERMINATOR = 0x0D           # Ends the field descriptor array (carriage return)

# Reserved runs inside the header and descriptors
HEADER_RESERVED = 20
TYPE_RESERVED = 4
PRECISION_RESERVED = 2
WORK_AREA_RESERVED = 2
FLAGS_RESERVED = 8

# The last-update year byte is an offset from this year
BASE_YEAR = 1900

# Version bytes accepted by the decoder
VERSION_DBASE3 = 0x03
VERSION_DBASE3_MEMO = 0x83
SUPPORTED_VERSIONS = frozenset({
    VERSION_DBASE3,
    VERSION_DBASE3_MEMO,
})

# Record deletion flag byte
RECORD_ACTIVE = 0x20        # ' '
RECORD_DELETED = 0x2A       # '*'

# Text decoding modes for C/N/M fields
TEXT_SIGNED = "signed"      # abs() of the signed byte value
TEXT_LATIN1 = "latin-1"     # unsigned byte value as code point
TEXT_DECODINGS = (TEXT_SIGNED, TEXT_LATIN1)
