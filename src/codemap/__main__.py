from codemap.cli import main

raise SystemExit(main())
