import sys
import threading
import time

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from config.config import Config
from orchestrator.dispatch_types import QueryOptions
from orchestrator.dispatcher import Dispatcher
from orchestrator.errors import AllProvidersFailed, InvalidArgument

HELP_TEXT = """
=== Available Commands ===
help            - Show this help message
providers       - List providers in the order they are tried
use <name|all>  - Restrict queries to one provider, or go back to all
clear           - Clear the result cache
exit/quit       - Exit the program
"""


def show_loading_animation(stop_event: threading.Event) -> None:
    """
    Show a loading animation in the console.

    Args:
        stop_event: A threading.Event that will be set to stop the animation
    """
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stdout.write(f'\r\033[93mThinking {char}\033[0m')
            sys.stdout.flush()
            time.sleep(0.1)

    sys.stdout.write('\r' + ' ' * 20 + '\r')
    sys.stdout.flush()


def run_query(dispatcher: Dispatcher, text: str, provider: str | None) -> None:
    stop_animation = threading.Event()
    loading_thread = threading.Thread(target=show_loading_animation, args=(stop_animation,))
    loading_thread.daemon = True
    loading_thread.start()

    try:
        result = dispatcher.query(text, QueryOptions(specific_provider=provider))
    finally:
        stop_animation.set()
        loading_thread.join()

    print(f"\nAI ({result.metadata.source}): {result.content}\n")


def main():
    config = Config()
    if not config.validate():
        print("Configuration is invalid. See logs/error.log for details.")
        return

    try:
        dispatcher = Dispatcher.from_config(config)
    except ValueError as e:
        print(f"Error initializing dispatcher: {e}")
        return

    provider: str | None = None
    print(f"\n=== Query Relay === ({config.get_dispatch_info()})")
    print("Type 'exit' to quit, 'providers' to list providers, or 'help' for commands\n")

    while True:
        try:
            user_input = input("You: ").strip()

            if not user_input:
                continue

            command = user_input.lower()
            if command in ('exit', 'quit'):
                print("\nGoodbye!")
                break

            if command == 'help':
                print(HELP_TEXT)
                continue

            if command == 'providers':
                print("\n=== Providers ===")
                for name in dispatcher.registry.names():
                    prefix = "* " if name == provider else "  "
                    print(f"{prefix}{name}")
                print("* = currently selected\n")
                continue

            if command.startswith('use '):
                choice = user_input[4:].strip()
                if choice.lower() == 'all':
                    provider = None
                    print("Querying all providers\n")
                elif dispatcher.registry.filter(choice):
                    provider = choice
                    print(f"Querying only {provider}\n")
                else:
                    print(f"Unknown provider: {choice}\n")
                continue

            if command == 'clear':
                dispatcher.clear_cache()
                print("Cache cleared\n")
                continue

            run_query(dispatcher, user_input, provider)

        except (KeyboardInterrupt, EOFError):
            print("\nExiting...")
            break
        except (AllProvidersFailed, InvalidArgument) as e:
            print(f"\nError: {e}\n")
            continue

    dispatcher.fetcher.close()


if __name__ == "__main__":
    main()
