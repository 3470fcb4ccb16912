from .lifecycle import Lifecycle
from .logs import install_thread_excepthook


def run_server():
    install_thread_excepthook()
    Lifecycle().run()


def main():
    run_server()


if __name__ == "__main__":
    main()
