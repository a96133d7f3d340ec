import sys

from sg_ip_sync.cmd import main

sys.exit(main())
