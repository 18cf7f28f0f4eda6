import sys

from pacgraph.game.turn_io import main

sys.exit(main(sys.argv[1:]))
