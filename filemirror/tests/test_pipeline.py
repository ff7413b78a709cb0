import io
import os

import pytest

from filemirror.pipeline import receive_files, send_changes
from filemirror.protocol import EndOfStream, InputStream, MissingColon, TruncatedFrame


@pytest.fixture
def src(tmp_path):
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def dst(tmp_path):
    path = tmp_path / "dst"
    path.mkdir()
    return path


class FlushCountingBuffer(io.BytesIO):
    def __init__(self):
        super().__init__()
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


def test_send_changes(src):
    (src / "a").write_bytes(b"1")
    (src / "b").write_bytes(b"22")

    out = FlushCountingBuffer()

    assert send_changes(["a", "b", "gone"], str(src), out) == 3
    assert out.getvalue() == b"1:a1:11:b2:224:gone-1:"

    # Every record is flushed immediately
    assert out.flushes == 3


def test_mirror_sequence(src, dst):
    (dst / "b").write_bytes(b"stale")
    (src / "a").write_bytes(b"first")

    out = io.BytesIO()
    send_changes(["a"], str(src), out)

    (src / "a").write_bytes(b"second")
    (src / "sub").mkdir()
    (src / "sub" / "c").write_bytes(b"nested")
    send_changes(["a", "b", os.path.join("sub", "c")], str(src), out)

    count = receive_files(InputStream(io.BytesIO(out.getvalue()).read, 3), str(dst))

    assert count == 4
    assert (dst / "a").read_bytes() == b"second"
    assert not (dst / "b").exists()
    assert (dst / "sub" / "c").read_bytes() == b"nested"


def test_receive_empty_stream(dst):
    assert receive_files(InputStream(io.BytesIO(b"").read), str(dst)) == 0


@pytest.mark.parametrize(
    "data, error",
    [
        (b"1:a", EndOfStream),
        (b"1:a1", MissingColon),
        (b"1:a5:ab", TruncatedFrame),
        (b"5:ab", TruncatedFrame),
        (b"1:a1:x1", MissingColon),
    ],
)
def test_receive_ends_mid_record(dst, data, error):
    with pytest.raises(error):
        receive_files(InputStream(io.BytesIO(data).read), str(dst))


def test_records_before_failure_are_applied(dst):
    with pytest.raises(EndOfStream):
        receive_files(InputStream(io.BytesIO(b"1:a2:ok1:b").read), str(dst))

    assert (dst / "a").read_bytes() == b"ok"


def test_unencodable_name_does_not_stop_sending(src):
    (src / "good").write_bytes(b"ok")

    out = FlushCountingBuffer()

    assert send_changes([os.fsdecode(b"bad\xff.txt"), "good"], str(src), out) == 1
    assert out.getvalue() == b"4:good2:ok"
