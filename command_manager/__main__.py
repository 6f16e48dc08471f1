from command_manager.cli import main

raise SystemExit(main())
