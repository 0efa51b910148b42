from csvscout.sniffer import detect_format, sniff_file, load_frame
from csvscout.errors import SniffError
from csvscout.utils import get_logger

logger = get_logger(__name__)

MOCK_SAMPLE = """Transaction Date;Valuta Date;Booking Text;Amount EUR;Balance
01.10.2023;01.10.2023;'Supermarket, Purchase';-50,20;1.000,00
02.10.2023;02.10.2023;Monthly Salary;3.500,00;4.500,00
05.10.2023;05.10.2023;Coffee Shop;-4,50;4.495,50
"""

def main(argv=None) -> int:
    import argparse
    import os

    parser = argparse.ArgumentParser(description='csvscout - Delimited Text Format Detection')
    parser.add_argument('file', nargs='?', help='Path to the delimited text file to inspect')
    parser.add_argument('--header', action='store_true', help='Treat the first row as field names')
    parser.add_argument('--separator', default=None, help='Extra delimiter candidate (first character is used)')
    parser.add_argument('--preview', type=int, default=0, metavar='N', help='Print the first N rows loaded with the detected format')
    args = parser.parse_args(argv)

    try:
        if args.file:
            if not os.path.exists(args.file):
                logger.error(f"File not found: {args.file}")
                return 1
            logger.info(f"Processing input file: {args.file}")
            descriptor = sniff_file(args.file, header_row=args.header, separator=args.separator)
            source = args.file
        else:
            logger.info("No input file provided. Using built-in Mock Data.")
            descriptor = detect_format(MOCK_SAMPLE, header_row=args.header, separator=args.separator)
            source = MOCK_SAMPLE
    except SniffError as e:
        logger.error(f"Format detection failed: {e}")
        return 1

    print("\n--- Detected Format ---")
    print(descriptor.model_dump_json(indent=2))

    if args.preview > 0:
        df = load_frame(source, descriptor, nrows=args.preview)
        print("\n--- Preview ---")
        print(df.head(args.preview))

    return 0

if __name__ == "__main__":
    import sys
    sys.exit(main())
