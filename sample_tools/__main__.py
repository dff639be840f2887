from sample_tools.cli import main

raise SystemExit(main())
