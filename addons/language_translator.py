"""HexChat addon script for the Language Translator.

Copy (or symlink) this file into HexChat's ``addons`` directory, with the
``hexchat-translator`` package installed into the Python HexChat embeds.
HexChat reads the ``__module_*__`` globals below and runs the module; the
``hexchat`` import only resolves inside HexChat.
"""

import hexchat

from hexchat_translator.plugin import PLUGIN_DESCRIPTION, PLUGIN_NAME, PLUGIN_VERSION, load

__module_name__ = PLUGIN_NAME
__module_version__ = PLUGIN_VERSION
__module_description__ = PLUGIN_DESCRIPTION

translator = load(hexchat)
