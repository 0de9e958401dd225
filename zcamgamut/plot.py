"""
Visualizing the sRGB gamut boundary in ZCAM.
"""
import sys

try:
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt
except ImportError:
    print("zcamgamut.plot requires matplotlib. Please install the package,")
    print("e.g., by executing `pip install matplotlib`, and then")
    print("run `python -m zcamgamut.plot` again.")
    sys.exit(1)

import argparse
import logging
import pathlib
from typing import Any

from .color import Gamut, GamutConfig, srgb_to_hex
from .color.conversion import linear_srgb_to_srgb
from .color.zcam import jch_to_linear_srgb
from .progress import ProgressBar


logger = logging.getLogger('zcamgamut')


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="""
            Build the boundary of the sRGB gamut in ZCAM and plot cusp
            lightness and chroma against hue. If the -o/--output option is
            specified, this script also writes the raw samples and fitted
            splines as text files with one x y pair per line into the named
            directory.
        """
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="run silently, without printing status updates"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="run in verbose mode, which prints extra information to the console"
    )
    parser.add_argument(
        "-o", "--output",
        help="write dumps of samples and splines into the named directory",
    )
    parser.add_argument(
        "--hue",
        action="append",
        type=float,
        dest="hues",
        help="also print the cusp for the hue in degrees",
    )
    parser.add_argument(
        "--plot",
        default="zcam-gamut.svg",
        help="write the plot to the named file (default: zcam-gamut.svg)",
    )
    return parser


class DumpWriter:
    """Write dumps as files into a directory."""

    def __init__(self, directory: pathlib.Path) -> None:
        directory.mkdir(parents=True, exist_ok=True)
        self._directory = directory

    def __call__(self, name: str, text: str) -> None:
        path = self._directory / f'{name}.txt'
        logger.debug('writing %s', path)
        path.write_text(text, encoding='utf8')


def create_figure(gamut: Gamut) -> Any:
    lightness = gamut.lightness_spline
    chroma = gamut.chroma_spline
    assert lightness is not None and chroma is not None

    first, last = gamut.extrema[0], gamut.extrema[-1]
    hues = [first + (last - first) * i / 720 for i in range(721)]
    js = [lightness(h) for h in hues]
    cs = [chroma(h) for h in hues]
    colors = [
        srgb_to_hex(*linear_srgb_to_srgb(*(
            min(max(c, 0.0), 1.0)
            for c in jch_to_linear_srgb(h, j, c, gamut.viewing)
        )))
        for h, j, c in zip(hues, js, cs)
    ]

    fig, (top, bottom) = plt.subplots(  # type: ignore
        2, 1, sharex=True, layout="constrained", figsize=(7, 6)
    )
    top.scatter(hues, js, c=colors, s=4)
    top.scatter(lightness.x, lightness.a, c="black", marker="+", s=16)
    top.set_ylabel("Cusp Lightness J")
    bottom.scatter(hues, cs, c=colors, s=4)
    bottom.scatter(chroma.x, chroma.a, c="black", marker="+", s=16)
    bottom.set_ylabel("Cusp Chroma C")
    bottom.set_xlabel("Hue h")
    for extremum in gamut.extrema:
        top.axvline(extremum, color="grey", linewidth=0.5)
        bottom.axvline(extremum, color="grey", linewidth=0.5)
    fig.suptitle("sRGB Gamut Boundary in ZCAM")
    return fig


def main(options: Any) -> None:
    volume = 1 - options.quiet + options.verbose
    logging.basicConfig(
        level=logging.DEBUG if volume > 1 else logging.INFO if volume == 1 else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    dump = None if options.output is None else DumpWriter(pathlib.Path(options.output))
    gamut = Gamut(config=GamutConfig(dump=dump))

    if volume > 0:
        ProgressBar().track(gamut.build_steps())
    else:
        gamut.build_boundary()

    for hue in options.hues or []:
        cusp = gamut.find_cusp(hue)
        print(f"cusp at {cusp.hue:.2f}°: J={cusp.lightness:.3f}, C={cusp.chroma:.3f}")

    fig = create_figure(gamut)
    logger.info("saving plot to `%s`", options.plot)
    fig.savefig(options.plot, bbox_inches="tight")  # type: ignore


if __name__ == "__main__":
    main(create_parser().parse_args())
