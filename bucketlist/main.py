from . import args as args_module
from . import config
from .map_app import BucketListGUI


def main(argv=None):
    """Main entry point for the BucketList GUI."""
    args_module.setup_config(argv)
    print(f"Saved places file: {config.save_path()}")

    app = BucketListGUI()
    app.run()


if __name__ == "__main__":
    main()
