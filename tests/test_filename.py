from utils.filename import build_content_disposition, extract_filename

T = 1700000000000


def clock():
    return T


def test_filename_from_last_path_segment():
    assert extract_filename("https://a.com/path/report.pdf") == "report.pdf"


def test_trailing_slashes_are_ignored():
    assert extract_filename("https://a.com/path/report.pdf//") == "report.pdf"


def test_filename_from_query_parameter():
    assert extract_filename("https://a.com/download?filename=movie.mp4") == "movie.mp4"


def test_query_parameters_follow_priority_order():
    url = "https://a.com/get?download=third.bin&name=second.bin&file=first.bin"
    assert extract_filename(url) == "first.bin"


def test_query_parameter_without_dot_is_skipped():
    url = "https://a.com/get?filename=nodot&name=clip.webm"
    assert extract_filename(url) == "clip.webm"


def test_path_segment_with_extension_beats_query():
    assert extract_filename("https://a.com/archive.zip?filename=other.tar") == "archive.zip"


def test_fallback_uses_hostname_and_clock():
    assert extract_filename("https://a.com/", now_ms=clock) == f"download_a.com_{T}"


def test_fallback_ignores_port_and_sanitizes_hostname():
    assert extract_filename("http://files.a-b.com:8080/stream", now_ms=clock) == f"download_files.a-b.com_{T}"


def test_unsafe_characters_are_replaced():
    assert extract_filename("https://a.com/a:b*c|d.txt") == "a_b_c_d.txt"


def test_percent_encoded_name_is_decoded():
    assert extract_filename("https://a.com/files/My%20Report%20%282024%29.pdf") == "My Report (2024).pdf"


def test_decoding_can_reveal_the_extension():
    assert extract_filename("https://a.com/report%2Epdf") == "report.pdf"


def test_undecodable_name_falls_back_to_timestamp():
    assert extract_filename("https://a.com/bad%E0.zip", now_ms=clock) == f"download_{T}"


def test_resolution_is_deterministic_for_fixed_clock():
    url = "https://a.com/watch?v=123"
    assert extract_filename(url, now_ms=clock) == extract_filename(url, now_ms=clock)


def test_content_disposition_carries_both_forms():
    assert build_content_disposition("report.pdf") == "attachment; filename=\"report.pdf\"; filename*=UTF-8''report.pdf"


def test_content_disposition_keeps_legacy_form_ascii():
    value = build_content_disposition("отчёт \"v2\".pdf")
    assert value == (
        "attachment; filename=\"_____ _v2_.pdf\"; "
        "filename*=UTF-8''%D0%BE%D1%82%D1%87%D1%91%D1%82%20%22v2%22.pdf"
    )
    value.encode("latin-1")
