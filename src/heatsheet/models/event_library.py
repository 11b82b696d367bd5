"""Standard age-group event library used to seed a meet's schedule."""

STROKE_PROGRAM: list[tuple[str, list[tuple[str, int]]]] = [
    (
        "Freestyle",
        [
            ("6 & Under", 25), ("7-8", 25), ("9-10", 50), ("11-12", 50), ("13-14", 50),
            ("15-17", 50), ("9-10", 100), ("11-12", 100), ("13-14", 100), ("15-17", 100),
            ("11-12", 200), ("13-14", 200), ("15-17", 200),
        ],
    ),
    (
        "Backstroke",
        [
            ("6 & Under", 25), ("7-8", 25), ("9-10", 50), ("11-12", 50),
            ("13-14", 100), ("15-17", 100),
        ],
    ),
    (
        "Breaststroke",
        [("7-8", 25), ("9-10", 50), ("11-12", 50), ("13-14", 100), ("15-17", 100)],
    ),
    (
        "Butterfly",
        [("7-8", 25), ("9-10", 50), ("11-12", 50), ("13-14", 100), ("15-17", 100)],
    ),
    ("IM", [("9-10", 100), ("11-12", 100), ("13-14", 200), ("15-17", 200)]),
]


def _build_library() -> list[str]:
    names: list[str] = []
    for stroke, bands in STROKE_PROGRAM:
        for age_band, distance in bands:
            # Girls and boys swim back to back
            for gender in ("Girls", "Boys"):
                names.append(f"{gender} {age_band} {distance}m {stroke}")
    return names


STANDARD_EVENT_LIBRARY: list[str] = _build_library()
