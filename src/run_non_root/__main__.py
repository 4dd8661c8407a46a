from run_non_root.presentation.cli import main

if __name__ == "__main__":
    main()
