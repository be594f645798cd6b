import argparse
import os

from x86asmtest.exceptions import ConfigError
from x86asmtest.gen.emit import write_fixtures, write_report
from x86asmtest.gen.generator import Generator
from x86asmtest.gen.product import Sampler
from x86asmtest.insndb.csvdb import Database


# this is the entry-point for the console-script x86asmtest
def main(argv=None):
    parser = argparse.ArgumentParser(
        description="generate Go assembler encoding tests checked by XED")
    parser.add_argument("csv",
        help="x86.csv instruction database")
    parser.add_argument("-o", "--outdir", default=".",
        help="directory for the generated .s files and report.txt")
    parser.add_argument("-c", "--cpuid", default="AVX512",
        help="only cover forms whose CPUID matches this regexp")
    parser.add_argument("-r", "--rotate",
        action="store_true", default=False,
        help="walk the argument tables instead of taking their prefix")
    parser.add_argument("-L", "--log",
        action="store_true", default=False,
        help="activate logging")

    args = parser.parse_args(argv)

    # if logging requested do not disable it.
    if not args.log:
        os.environ["SILENCELOG"] = "1"

    db = Database.from_csv(args.csv)
    generator = Generator(sampler=Sampler(rotate=args.rotate))
    try:
        generator.run(db.forms(cpuid=args.cpuid))
    except ConfigError as e:
        parser.exit(1, f"{parser.prog}: configuration error: {e}\n")

    paths = write_fixtures(args.outdir, generator.fixtures)
    write_report(os.path.join(args.outdir, "report.txt"), generator)

    print(f"{len(generator.fixtures)} fixtures in {len(paths)} files, "
          f"{len(generator.skipped)} forms skipped, "
          f"{len(generator.failures)} combinations failed")


if __name__ == "__main__":
    main()
