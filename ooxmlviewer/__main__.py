from ooxmlviewer.cli import main

raise SystemExit(main())
