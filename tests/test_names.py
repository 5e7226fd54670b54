import pytest

from revproxy_core.names import PathName, ServerName, to_path_name, to_server_name


def test_bytes_name_str_works():
    s = "OK_string"
    bn = to_path_name(s)
    bn_lc = to_server_name(s)
    assert bytes(bn) == b"ok_string"
    assert bytes(bn_lc) == b"ok_string"


def test_from_works():
    s = to_server_name("OK_string")
    m = ServerName("OK_strinG".encode())
    assert s == m
    assert bytes(s) == b"ok_string"
    assert bytes(m) == b"ok_string"


@pytest.mark.parametrize(
    "index, expected",
    [
        (0, "o".encode()[0]),
        (1, "k".encode()[0]),
        (2, "_".encode()[0]),
        (3, "s".encode()[0]),
        (4, "t".encode()[0]),
        (5, "r".encode()[0]),
        (6, None),
    ],
)
def test_get_works(index, expected):
    s = to_path_name("OK_str")
    assert s.get(index) == expected


def test_start_with_works():
    s = to_path_name("OK_str")
    correct = to_path_name("OK")
    incorrect = to_path_name("KO")
    assert s.starts_with(correct)
    assert not s.starts_with(incorrect)


def test_as_ref_works():
    s = to_path_name("OK_str")
    assert bytes(s) == b"ok_str"


def test_get_slice_within_and_out_of_bounds():
    s = to_path_name("/Path/ok")
    assert s.get(slice(0, 5)) == b"/path"
    assert s.get(slice(0, 99)) is None
    assert s.get(-1) is None


def test_to_str_round_trip():
    assert to_server_name("Example.COM").to_str() == "example.com"
    assert to_path_name("/A/b").to_str() == "/a/b"


def test_to_str_rejects_invalid_utf8():
    with pytest.raises(UnicodeDecodeError):
        ServerName(b"\xff\xfe").to_str()


def test_only_ascii_is_lowered():
    assert ServerName("ÄB").to_str() == "Äb"


def test_usable_as_dict_key():
    apps = {to_server_name("A.example"): 1}
    assert apps[ServerName(b"a.EXAMPLE")] == 1


def test_server_and_path_names_are_distinct():
    assert (ServerName("a") == PathName("a")) is False
    assert len(PathName("abc")) == 3


def test_default_is_empty():
    assert len(PathName()) == 0
    assert not ServerName()
    assert ServerName() == ServerName("")


def test_rejects_other_types():
    with pytest.raises(TypeError):
        ServerName(5)