import pytest

from cubenet.protocol import SegmentId, segment_label


@pytest.mark.parametrize(
    "raw, member",
    [
        (0x07, SegmentId.START_OF_MESSAGE),
        (0x0D, SegmentId.DATA),
        (0x09, SegmentId.END_OF_MESSAGE),
        (0x0A, SegmentId.ACK),
    ],
)
def test_segment_id_wire_values(raw, member):
    assert SegmentId(raw) is member
    assert int(member) == raw


def test_labels_match_names():
    assert SegmentId.START_OF_MESSAGE.label() == "START_OF_MESSAGE"
    assert SegmentId.DATA.label() == "DATA"
    assert SegmentId.END_OF_MESSAGE.label() == "END_OF_MESSAGE"
    assert SegmentId.ACK.label() == "ACK"


def test_segment_label_for_known_ids():
    for member in SegmentId:
        assert segment_label(int(member)) == member.label()


def test_segment_label_for_unknown_id():
    assert segment_label(0x00) == "INVALID"
    assert segment_label(0xFF) == "INVALID"


def test_segment_label_covers_every_byte():
    known = {member.label() for member in SegmentId}
    labels = [segment_label(value) for value in range(256)]
    assert sum(label in known for label in labels) == len(SegmentId)
    assert all(label in known or label == "INVALID" for label in labels)