from edl_engine.cli import main

raise SystemExit(main())
