from jmcp.cli import main

raise SystemExit(main())
