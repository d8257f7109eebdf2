#!/usr/bin/env python3
import argparse
import logging

from cas import CAS
from rational import QQ
from rings import GF, ZZ


def main(argv=None):
    ap = argparse.ArgumentParser(description="Factor a polynomial given as a string.")
    ap.add_argument("poly", nargs="?", default="x^4 - 1")
    ap.add_argument("--mod", type=int, metavar="P", help="work over GF(P) instead of ZZ")
    ap.add_argument("--rational", action="store_true", help="work over QQ")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    ring = GF(args.mod) if args.mod else QQ if args.rational else ZZ
    cas = CAS(ring)
    p = cas.parse(args.poly)
    print(f"{p}  over {ring}")
    print("squarefree:", cas.format_factors(cas.squarefree(p)))
    print("factors:   ", cas.format_factors(cas.factor(p)))


if __name__ == "__main__":
    main()
