from enum import Enum, Flag


class CAFChunkType(Enum):
    '''The chunk type, described as a four-character code. Apple reserves all
    codes made only of lowercase letters, space and period.'''
    AUDIO_DESCRIPTION = b'desc'
    AUDIO_DATA        = b'data'
    CHANNEL_LAYOUT    = b'chan'
    INFORMATION       = b'info'
    PACKET_TABLE      = b'pakt'
    MAGIC_COOKIE      = b'kuki'
    FREE              = b'free'
    # documented but not decoded
    STRINGS           = b'strg'
    MARKER            = b'mark'
    REGION            = b'regn'
    INSTRUMENT        = b'inst'
    MIDI              = b'midi'
    OVERVIEW          = b'ovvw'
    PEAK              = b'peak'
    EDIT_COMMENTS     = b'edct'
    UMID              = b'umid'
    UUID              = b'uuid'


class CAFAudioFormatID(Enum):
    LINEAR_PCM     = 0x6c70636d  # 'lpcm'
    APPLE_IMA4     = 0x696d6134  # 'ima4'
    MPEG4_AAC      = 0x61616320  # 'aac '
    MACE3          = 0x4d414333  # 'MAC3'
    MACE6          = 0x4d414336  # 'MAC6'
    ULAW           = 0x756c6177  # 'ulaw'
    ALAW           = 0x616c6177  # 'alaw'
    MPEG_LAYER_1   = 0x2e6d7031  # '.mp1'
    MPEG_LAYER_2   = 0x2e6d7032  # '.mp2'
    MPEG_LAYER_3   = 0x2e6d7033  # '.mp3'
    APPLE_LOSSLESS = 0x616c6163  # 'alac'
    AC3            = 0x61632d33  # 'ac-3'
    FLAC           = 0x666c6163  # 'flac'
    OPUS           = 0x6f707573  # 'opus'


class CAFLinearPCMFormatFlag(Flag):
    NONE             = 0
    IS_FLOAT         = 1 << 0
    IS_LITTLE_ENDIAN = 1 << 1


class CAFChannelLayoutTag(Enum):
    '''The low 16 bits are the number of channels, the high 16 bits
    indicate a specific ordering of them.'''
    USE_CHANNEL_DESCRIPTIONS = (0 << 16) | 0
    USE_CHANNEL_BITMAP       = (1 << 16) | 0
    MONO                     = (100 << 16) | 1
    STEREO                   = (101 << 16) | 2
    STEREO_HEADPHONES        = (102 << 16) | 2
    MATRIX_STEREO            = (103 << 16) | 2
    MID_SIDE                 = (104 << 16) | 2
    XY                       = (105 << 16) | 2
    BINAURAL                 = (106 << 16) | 2
    AMBISONIC_B_FORMAT       = (107 << 16) | 4
    QUADRAPHONIC             = (108 << 16) | 4
    PENTAGONAL               = (109 << 16) | 5
    HEXAGONAL                = (110 << 16) | 6
    OCTAGONAL                = (111 << 16) | 8
    CUBE                     = (112 << 16) | 8
    MPEG_3_0_A               = (113 << 16) | 3  # L R C
    MPEG_3_0_B               = (114 << 16) | 3  # C L R
    MPEG_4_0_A               = (115 << 16) | 4  # L R C Cs
    MPEG_4_0_B               = (116 << 16) | 4  # C L R Cs
    MPEG_5_0_A               = (117 << 16) | 5  # L R C Ls Rs
    MPEG_5_0_B               = (118 << 16) | 5  # L R Ls Rs C
    MPEG_5_0_C               = (119 << 16) | 5  # L C R Ls Rs
    MPEG_5_0_D               = (120 << 16) | 5  # C L R Ls Rs
    MPEG_5_1_A               = (121 << 16) | 6  # L R C LFE Ls Rs
    MPEG_5_1_B               = (122 << 16) | 6  # L R Ls Rs C LFE
    MPEG_5_1_C               = (123 << 16) | 6  # L C R Ls Rs LFE
    MPEG_5_1_D               = (124 << 16) | 6  # C L R Ls Rs LFE
    MPEG_6_1_A               = (125 << 16) | 7  # L R C LFE Ls Rs Cs
    MPEG_7_1_A               = (126 << 16) | 8  # L R C LFE Ls Rs Lc Rc
    MPEG_7_1_B               = (127 << 16) | 8  # C Lc Rc L R Ls Rs LFE
    MPEG_7_1_C               = (128 << 16) | 8  # L R C LFE Ls Rs Rls Rrs
    EMAGIC_DEFAULT_7_1       = (129 << 16) | 8
    SMPTE_DTV                = (130 << 16) | 8
    ITU_2_1                  = (131 << 16) | 3  # L R Cs
    ITU_2_2                  = (132 << 16) | 4  # L R Ls Rs
    DVD_4                    = (133 << 16) | 3  # L R LFE
    DVD_5                    = (134 << 16) | 4  # L R LFE Cs
    DVD_6                    = (135 << 16) | 5  # L R LFE Ls Rs
    DVD_10                   = (136 << 16) | 4  # L R C LFE
    DVD_11                   = (137 << 16) | 5  # L R C LFE Cs
    DVD_18                   = (138 << 16) | 5  # L R Ls Rs LFE
    AUDIO_UNIT_6_0           = (139 << 16) | 6  # L R Ls Rs C Cs
    AUDIO_UNIT_7_0           = (140 << 16) | 7  # L R Ls Rs C Rls Rrs
    AAC_6_0                  = (141 << 16) | 6  # C L R Ls Rs Cs
    AAC_6_1                  = (142 << 16) | 7  # C L R Ls Rs Cs Lfe
    AAC_7_0                  = (143 << 16) | 7  # C L R Ls Rs Rls Rrs
    AAC_OCTAGONAL            = (144 << 16) | 8  # C L R Ls Rs Rls Rrs Cs
    TMH_10_2_STD             = (145 << 16) | 16
    TMH_10_2_FULL            = (146 << 16) | 21

    @property
    def number_of_channels(self):
        return self.value & 0xffff


class CAFChannelBitmap(Flag):
    NONE                   = 0
    LEFT                   = 1 << 0
    RIGHT                  = 1 << 1
    CENTER                 = 1 << 2
    LFE_SCREEN             = 1 << 3
    LEFT_SURROUND          = 1 << 4   # WAVE: "Back Left"
    RIGHT_SURROUND         = 1 << 5   # WAVE: "Back Right"
    LEFT_CENTER            = 1 << 6
    RIGHT_CENTER           = 1 << 7
    CENTER_SURROUND        = 1 << 8   # WAVE: "Back Center"
    LEFT_SURROUND_DIRECT   = 1 << 9   # WAVE: "Side Left"
    RIGHT_SURROUND_DIRECT  = 1 << 10  # WAVE: "Side Right"
    TOP_CENTER_SURROUND    = 1 << 11
    VERTICAL_HEIGHT_LEFT   = 1 << 12  # WAVE: "Top Front Left"
    VERTICAL_HEIGHT_CENTER = 1 << 13  # WAVE: "Top Front Center"
    VERTICAL_HEIGHT_RIGHT  = 1 << 14  # WAVE: "Top Front Right"
    TOP_BACK_LEFT          = 1 << 15
    TOP_BACK_CENTER        = 1 << 16
    TOP_BACK_RIGHT         = 1 << 17


class CAFChannelLabel(Enum):
    UNKNOWN                = 0xffffffff
    UNUSED                 = 0
    USE_COORDINATES        = 100
    LEFT                   = 1
    RIGHT                  = 2
    CENTER                 = 3
    LFE_SCREEN             = 4
    LEFT_SURROUND          = 5
    RIGHT_SURROUND         = 6
    LEFT_CENTER            = 7
    RIGHT_CENTER           = 8
    CENTER_SURROUND        = 9
    LEFT_SURROUND_DIRECT   = 10
    RIGHT_SURROUND_DIRECT  = 11
    TOP_CENTER_SURROUND    = 12
    VERTICAL_HEIGHT_LEFT   = 13
    VERTICAL_HEIGHT_CENTER = 14
    VERTICAL_HEIGHT_RIGHT  = 15
    TOP_BACK_LEFT          = 16
    TOP_BACK_CENTER        = 17
    TOP_BACK_RIGHT         = 18
    REAR_SURROUND_LEFT     = 33
    REAR_SURROUND_RIGHT    = 34
    LEFT_WIDE              = 35
    RIGHT_WIDE             = 36
    LFE2                   = 37
    LEFT_TOTAL             = 38
    RIGHT_TOTAL            = 39
    HEARING_IMPAIRED       = 40
    NARRATION              = 41
    MONO                   = 42
    DIALOG_CENTRIC_MIX     = 43
    CENTER_SURROUND_DIRECT = 44
    AMBISONIC_W            = 200
    AMBISONIC_X            = 201
    AMBISONIC_Y            = 202
    AMBISONIC_Z            = 203
    MS_MID                 = 204
    MS_SIDE                = 205
    XY_X                   = 206
    XY_Y                   = 207
    HEADPHONES_LEFT        = 301
    HEADPHONES_RIGHT       = 302
    CLICK_TRACK            = 304
    FOREIGN_LANGUAGE       = 305


class CAFChannelFlags(Flag):
    ALL_OFF                 = 0
    RECTANGULAR_COORDINATES = 1 << 0
    SPHERICAL_COORDINATES   = 1 << 1
    METERS                  = 1 << 2
