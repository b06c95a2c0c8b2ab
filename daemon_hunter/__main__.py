from daemon_hunter.cli.main import main

raise SystemExit(main())
