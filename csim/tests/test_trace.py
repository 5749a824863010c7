import pytest
from csim.core.trace import (
    OperationKind,
    TraceRecord,
    UnreadableTraceError,
    iter_trace,
    parse_line,
    read_trace,
)


@pytest.mark.parametrize('line, op, address, size', [
    (' L 10,1', OperationKind.LOAD, 0x10, 1),
    (' S 18,8', OperationKind.STORE, 0x18, 8),
    (' M 7ff000398,4', OperationKind.MODIFY, 0x7ff000398, 4),
    ('L 0x20,2', OperationKind.LOAD, 0x20, 2),
    ('  L   ABC , 4\n', OperationKind.LOAD, 0xABC, 4),
    ('I  0400d7d4,8', OperationKind.OTHER, 0x0400d7d4, 8),
])
def test_parse_line(line, op, address, size):
    record = parse_line(line)
    assert record.op is op
    assert record.address == address
    assert record.size == size


def test_parse_line_keeps_text_for_verbose_output():
    assert parse_line(' L 10,1\n').text == 'L 10,1'


@pytest.mark.parametrize('line', ['garbage', 'L zz,1', 'L 10', '==1234== header'])
def test_malformed_lines_become_other(line):
    record = parse_line(line)
    assert record.op is OperationKind.OTHER


def test_blank_lines_are_dropped():
    assert parse_line('') is None
    assert parse_line('   \n') is None
    records = list(iter_trace([' L 0,1', '', ' S 4,1']))
    assert [r.op for r in records] == [OperationKind.LOAD, OperationKind.STORE]


def test_from_char():
    assert OperationKind.from_char('M') is OperationKind.MODIFY
    assert OperationKind.from_char('l') is OperationKind.OTHER


def test_read_trace(write_trace):
    path = write_trace([' L 10,1', ' M 20,1', 'I 30,4'])
    records = list(read_trace(path))
    assert records == [
        TraceRecord(OperationKind.LOAD, 0x10, 1, 'L 10,1'),
        TraceRecord(OperationKind.MODIFY, 0x20, 1, 'M 20,1'),
        TraceRecord(OperationKind.OTHER, 0x30, 4, 'I 30,4'),
    ]


def test_read_trace_missing_file_fails_immediately(tmp_path):
    missing = str(tmp_path / 'nope.trace')
    with pytest.raises(UnreadableTraceError) as info:
        read_trace(missing)
    assert info.value.filename == missing
    assert isinstance(info.value, OSError)
