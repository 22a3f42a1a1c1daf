#!/usr/bin/env python3
"""Basic usage example"""

from logbus import Logger, LoggerConfig, MessageType

def main():
    # Create and initialize the logger
    logger = Logger(LoggerConfig(name="example", default_level=MessageType.DEBUG))
    logger.initialize()
    logger.toggle_console_engine(True)

    # File sinks pick their format from the extension
    logger.new_file_engine("text log", "logs/example.txt")
    logger.new_file_engine("xml log", "logs/example.xml")

    # Priority messages are also emitted on their own channel
    logger.set_priority_formatting_engine("Native Message Format")
    logger.priority_message.connect(lambda level, text: print(f"PRIORITY: {text}"))

    # Log messages
    logger.trace("This is trace")  # above Debug, filtered
    logger.debug("This is debug")
    logger.info("Application started")
    logger.warning("This is warning", "with", "parts")
    logger.log_priority_message("example", MessageType.ERROR, "Disk", "full")

    # Save the engine configuration for the next run
    result = logger.save_session_config("logs/session.lbs")
    print(result.message)

    # Flush and shutdown
    logger.flush()
    logger.finalize()

if __name__ == "__main__":
    main()
