"""Loading vault notes into table documents."""
