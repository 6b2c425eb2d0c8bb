"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - single column
   ============================================ */
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

/* ============================================
   Chat Messages
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 1 2;
    background: transparent;
}

.user-message {
    border-left: tall $primary;
    background: $primary 10%;

    & .message-header {
        color: $primary;
        text-style: bold;
    }
}

.bot-message {
    border-left: tall $secondary;
    background: $secondary 8%;

    & .message-header {
        color: $secondary;
        text-style: bold;
    }
}

.error-message {
    border-left: tall $error;
    background: $error 12%;

    & .message-header {
        color: $error;
        text-style: bold;
    }
}

.message-header {
    height: auto;
}

.message-content {
    height: auto;
    margin: 0;
    color: $foreground;
}

.message-sources {
    height: auto;
    margin: 1 0 0 0;
    color: $text-muted;
}

/* Audio controls under a bot message */
.audio-controls {
    height: auto;
    margin-top: 1;
    display: none;

    &.-available {
        display: block;
    }
}

.audio-button {
    min-width: 12;
    height: 3;
    border: tall $accent 60%;
    background: $surface;
    color: $accent;

    &:hover {
        background: $accent 20%;
    }

    &.-playing {
        background: $accent;
        color: $background;
        text-style: bold;
    }
}

/* ============================================
   Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
}

/* ============================================
   Bottom Bar - Status + Input
   ============================================ */
#bottom-bar {
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

#status-bar {
    height: 1;
    padding: 0 2;
    background: $surface;
    color: $foreground;
}

ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }

    &.-loading {
        border: round $warning;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#send-btn {
    width: 12;
    height: 100%;
    margin: 0 0 0 1;
    border: tall $primary;
    background: $primary;
    color: $foreground;
    text-style: bold;

    &:hover {
        background: $primary-lighten-1;
    }

    &:disabled {
        background: $surface;
        border: tall $border;
        color: $text-disabled;
    }
}

/* ============================================
   Header / Footer
   ============================================ */
Header {
    background: $primary;
    color: $foreground;
    dock: top;
    height: 1;
}

HeaderTitle {
    text-style: bold;
}

Footer {
    background: $panel;
}

/* ============================================
   Markdown Content
   ============================================ */
Markdown {
    margin: 0;
    padding: 0;
}

MarkdownBlockQuote {
    border-left: wide $primary;
    background: $primary 8%;
    padding: 0 1;
}

Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-error {
        border: tall $error;
    }

    &.-warning {
        border: tall $warning;
    }
}
"""
