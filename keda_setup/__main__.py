from keda_setup.cli import main

if __name__ == "__main__":
    main()
