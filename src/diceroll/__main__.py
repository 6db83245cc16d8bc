from diceroll.cli import main

raise SystemExit(main())
