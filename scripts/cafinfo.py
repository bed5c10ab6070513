#!/usr/bin/env python3
import sys
import os
import logging

from cafstruct.audio.caf import CAFFile
from cafstruct.audio.caf.enum import CAFChannelLayoutTag
from cafstruct.audio.caf.utils import fourcc

if 'DEBUG' in os.environ:
    logging.basicConfig()
    logger = logging.getLogger('cafstruct')
    logger.setLevel(logging.DEBUG)


def usage(progname):
    print('usage: %s <caf file>' % progname)
    sys.exit(1)


def dump_header(hdr):
    print(f'''CAF Header:
  File type:                         {hdr.file_type.value.decode('latin1')}
  Version:                           {hdr.file_version.value}
  Flags:                             {hdr.file_flags}''')


def dump_description(desc):
    print(f'''Audio Description:
  Sample rate:                       {desc.sample_rate.value}
  Format:                            {fourcc(desc.format_id.value)}
  Format flags:                      {desc.format_flags}
  Bytes per packet:                  {desc.bytes_per_packet.value}
  Frames per packet:                 {desc.frames_per_packet.value}
  Channels per frame:                {desc.channels_per_frame.value}
  Bits per channel:                  {desc.bits_per_channel.value}''')

    if desc.linear_pcm_flags is not None:
        print(f'''  Linear PCM flags:                  {desc.linear_pcm_flags}''')


def dump_chunks(chunks):
    print('''Chunks:
  [Nr] Type   Offset           Size''')
    for idx, chunk in enumerate(chunks):
        metadata = chunk.metadata
        size = 'to end' if metadata.extends_to_end else str(metadata.size)
        print(f'''  [{idx: >2d}] {metadata.tag.decode('latin1'):<6} 0x{metadata.offset:012x}   {size}''')


def dump_layout(layout):
    tag = layout.layout_tag.value
    print(f'''Channel Layout:
  Tag:                               {tag}''')
    if tag == CAFChannelLayoutTag.USE_CHANNEL_BITMAP:
        print(f'''  Bitmap:                            {layout.channel_bitmap.value}''')

    for description in layout.channel_descriptions:
        print(f'''  {description.channel_label.value:<35} {description.coordinates}''')


def dump_information(information):
    print('Information:')
    for info in information:
        for key, value in info.to_dict().items():
            print(f'''  {key:<35}{value}''')


def dump_packet_table(table, packets):
    print(f'''Packet Table:
  Number of packets:                 {table.number_packets.value}
  Valid frames:                      {table.number_valid_frames.value}
  Priming frames:                    {table.priming_frames.value}
  Remainder frames:                  {table.remainder_frames.value}''')
    if packets:
        largest = max(_.size for _ in packets)
        print(f'''  Largest packet:                    {largest} (bytes)''')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]

    caf = CAFFile(path, strict='STRICT' in os.environ)

    dump_header(caf.header)
    dump_description(caf.audio_description)
    dump_chunks(caf.chunks)

    if caf.channel_layout:
        dump_layout(caf.channel_layout)

    if caf.information:
        dump_information(caf.information)

    if caf.packet_table:
        dump_packet_table(caf.packet_table, caf.packets)

    data = caf.audio_data
    print(f'''Audio Data:
  Offset:                            0x{data.data_offset:x}
  Size:                              {'to end of file' if data.extends_to_end else data.size}''')

    duration = caf.duration
    if duration is not None:
        print(f'''  Duration:                          {duration:.3f} (seconds)''')
