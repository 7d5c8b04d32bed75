from soundctl.core.text import normalize, tokenize


def test_normalize_replaces_smart_quotes() -> None:
    assert normalize("Someone’s “Studio” Mic‘") == "Someone's \"Studio\" Mic'"


def test_normalize_is_idempotent() -> None:
    value = "‘a’ “b” plain"
    assert normalize(normalize(value)) == normalize(value)


def test_normalize_commutes_with_concatenation() -> None:
    left, right = normalize("Alice’s "), normalize("“AirPods”")
    assert normalize(left + right) == left + right


def test_tokenize_splits_possessives_and_lowercases() -> None:
    assert tokenize("Someone's AirPods Max") == {"someone", "s", "airpods", "max"}


def test_tokenize_handles_smart_quotes_and_separators() -> None:
    assert tokenize("Someone’s AirPods--Max  (2)") == {"someone", "s", "airpods", "max", "2"}
    assert tokenize("bluez_output.AC_80") == {"bluez", "output", "ac", "80"}


def test_tokenize_deduplicates_and_drops_empty() -> None:
    assert tokenize("  mic MIC mic!! ") == {"mic"}
    assert tokenize("") == set()
    assert tokenize("--- ''") == set()
