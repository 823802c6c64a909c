from utils.analysis_pipeline import parse_suggested_settings

RESPONSE = """Here are suggested settings for a moody film look.

**Basic:**
- **Exposure**: -0.30
- Contrast: +20
- Highlights = -45
1. Temperature: 5200K (slightly warm)
* **Vibrance:** -10

Color Grading - Shadows: Hue 210, Saturation 15
Enjoy editing!
"""


def test_extracts_key_value_lines() -> None:
    assert parse_suggested_settings(RESPONSE) == [
        ("Exposure", "-0.30"),
        ("Contrast", "+20"),
        ("Highlights", "-45"),
        ("Temperature", "5200K (slightly warm)"),
        ("Vibrance", "-10"),
        ("Color Grading - Shadows", "Hue 210, Saturation 15"),
    ]


def test_plain_prose_yields_nothing() -> None:
    assert parse_suggested_settings("Increase the exposure a little and warm it up.") == []
    assert parse_suggested_settings("") == []
