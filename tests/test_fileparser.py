import pytest

from worksheetimport.fileparser.api import batch_id_from_filename, detect_format, parse, parse_text
from worksheetimport.fileparser.fileparser import ParserError
from worksheetimport.fileparser.model import FORMAT_A, FORMAT_B


def test_parse_tab_file_strips_carriage_return_from_first_field(tmp_path):
    p = tmp_path / "B100.txt"
    p.write_bytes(b"No\tSample\tCBD\r\n1\r\t101_A\t1.2\r\n")

    parsed = parse(str(p), FORMAT_A)

    assert parsed.header == ["No", "Sample", "CBD\r"]
    assert parsed.data_rows[0] == ["1", "101_A", "1.2\r"]
    assert parsed.data_rows[-1] == [""]
    assert parsed.meta["format"] == "A"


def test_parse_csv_header_after_preamble():
    text = "Report\nInstrument,LC-1\n\nSample,CBD,THC\n205-spk_B,3.1,0.2\n"
    parsed = parse_text(text, FORMAT_B)
    assert parsed.header == ["Sample", "CBD", "THC"]
    assert parsed.data_rows[0] == ["205-spk_B", "3.1", "0.2"]


def test_parse_missing_file_raises_parser_error(tmp_path):
    with pytest.raises(ParserError):
        parse(str(tmp_path / "missing.csv"), FORMAT_B)


def test_file_shorter_than_header_row_raises():
    with pytest.raises(ParserError):
        parse_text("only,one,line", FORMAT_B)


def test_latin1_content_is_readable(tmp_path):
    p = tmp_path / "b.txt"
    p.write_bytes("ID\tName\tCBD\n1\tMB_\xb5g\t0\n".encode("latin-1"))
    parsed = parse(str(p), FORMAT_A)
    assert parsed.data_rows[0][1] == "MB_µg"


def test_detect_format_by_extension():
    assert detect_format("B100.TXT") is FORMAT_A
    assert detect_format("/tmp/b100.csv") is FORMAT_B
    with pytest.raises(ParserError):
        detect_format("b100.xlsx")


def test_batch_id_from_filename():
    assert batch_id_from_filename("/uploads/B1234.CSV") == "b1234"
    assert batch_id_from_filename("4711.txt") == "4711"
