"""Common FFmpeg command arguments."""

INPUT_FLAG: tuple[str, ...] = ("-i",)  #: Introduce an input file path.
FILTER_COMPLEX: tuple[str, ...] = ("-filter_complex",)  #: Multi-input filter graph.
SHORTEST: tuple[str, ...] = ("-shortest",)  #: Stop the output when the shortest stream ends.
OUTPUT_NAME = "output.mp4"  #: Fixed output name in engine storage.
CLAUSE_SEPARATOR = ";"  #: Separates filter chains inside one graph.
