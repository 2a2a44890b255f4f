import argparse
import json
import sys

from .engine import NTTEngine
from .ntt_parameters import NTTParameters, DEFAULT_PARAMETERS
from .utils import parse_coefficients


def polynomial(text):
    try:
        return parse_coefficients(text)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid polynomial {text!r}, expected comma-separated integers"
        )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="python -m ntt",
        description="Exact polynomial arithmetic modulo an NTT-friendly prime. "
        "Polynomials are comma-separated coefficients, constant term first.",
    )
    parser.add_argument(
        "--modulus",
        type=int,
        default=DEFAULT_PARAMETERS.modulus,
        help=f"Prime modulus (default: {DEFAULT_PARAMETERS.modulus})",
    )
    parser.add_argument(
        "--cutoff",
        type=int,
        default=DEFAULT_PARAMETERS.fft_cutoff,
        help="Operand length below which the direct convolution is used "
        f"(default: {DEFAULT_PARAMETERS.fft_cutoff})",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print which multiplication path is taken",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as a JSON list",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    multiply = commands.add_parser("multiply", help="Multiply two polynomials")
    multiply.add_argument("left", type=polynomial)
    multiply.add_argument("right", type=polynomial)
    multiply.add_argument(
        "--circular",
        action="store_true",
        help="Wrap indices modulo the power-of-two transform size",
    )

    power = commands.add_parser("power", help="Raise a polynomial to a power")
    power.add_argument("polynomial", type=polynomial)
    power.add_argument("exponent", type=int)

    multiply_all = commands.add_parser(
        "multiply-all", help="Multiply any number of polynomials"
    )
    multiply_all.add_argument("polynomials", type=polynomial, nargs="+")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        engine = NTTEngine.from_parameters(
            NTTParameters(
                modulus=args.modulus, fft_cutoff=args.cutoff, verbose=args.verbose
            )
        )
    except ValueError as e:
        parser.error(str(e))

    if args.command == "multiply":
        result = engine.multiply(args.left, args.right, circular=args.circular)
    elif args.command == "power":
        if args.exponent < 0:
            parser.error(f"exponent must be non-negative, got {args.exponent}")
        result = engine.power(args.polynomial, args.exponent)
    else:
        result = engine.multiply_all(args.polynomials)

    if args.json:
        print(json.dumps(result))
    else:
        print(" ".join(str(c) for c in result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
