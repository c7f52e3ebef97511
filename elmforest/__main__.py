import sys

from elmforest.main import main

sys.exit(main())
