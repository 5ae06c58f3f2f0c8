from console import run_console
import sys

if __name__ == '__main__':
    sys.exit(run_console(sys.argv[1:]))
