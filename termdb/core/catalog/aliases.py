"""Termcap short codes for the terminfo capabilities.

Each table maps a two-character termcap code to its canonical terminfo
variable name. Codes are unique within a category; a few codes are reused
across categories (`MT`, `ma`), so lookups that know the category should
use the per-category table.
"""

from __future__ import annotations

from typing import Dict

BOOLEAN_ALIASES: Dict[str, str] = {
    "bw": "auto_left_margin",
    "am": "auto_right_margin",
    "xb": "no_esc_ctlc",
    "xs": "ceol_standout_glitch",
    "xn": "eat_newline_glitch",
    "eo": "erase_overstrike",
    "gn": "generic_type",
    "hc": "hard_copy",
    "km": "has_meta_key",
    "hs": "has_status_line",
    "in": "insert_null_glitch",
    "da": "memory_above",
    "db": "memory_below",
    "mi": "move_insert_mode",
    "ms": "move_standout_mode",
    "os": "over_strike",
    "es": "status_line_esc_ok",
    "xt": "dest_tabs_magic_smso",
    "hz": "tilde_glitch",
    "ul": "transparent_underline",
    "xo": "xon_xoff",
    "nx": "needs_xon_xoff",
    "5i": "prtr_silent",
    "HC": "hard_cursor",
    "NR": "non_rev_rmcup",
    "NP": "no_pad_char",
    "ND": "non_dest_scroll_region",
    "cc": "can_change",
    "ut": "back_color_erase",
    "hl": "hue_lightness_saturation",
    "YA": "col_addr_glitch",
    "YB": "cr_cancels_micro_mode",
    "YC": "has_print_wheel",
    "YD": "row_addr_glitch",
    "YE": "semi_auto_right_margin",
    "YF": "cpi_changes_res",
    "YG": "lpi_changes_res",
    "bs": "backspaces_with_bs",
    "ns": "crt_no_scrolling",
    "nc": "no_correctly_working_cr",
    "MT": "gnu_has_meta_key",
    "NL": "linefeed_is_newline",
    "pt": "has_hardware_tabs",
    "xr": "return_does_clr_eol",
}

NUMBER_ALIASES: Dict[str, str] = {
    "co": "columns",
    "it": "init_tabs",
    "li": "lines",
    "lm": "lines_of_memory",
    "sg": "magic_cookie_glitch",
    "pb": "padding_baud_rate",
    "vt": "virtual_terminal",
    "ws": "width_status_line",
    "Nl": "num_labels",
    "lh": "label_height",
    "lw": "label_width",
    "ma": "max_attributes",
    "MW": "maximum_windows",
    "Co": "max_colors",
    "pa": "max_pairs",
    "NC": "no_color_video",
    "Ya": "buffer_capacity",
    "Yb": "dot_vert_spacing",
    "Yc": "dot_horz_spacing",
    "Yd": "max_micro_address",
    "Ye": "max_micro_jump",
    "Yf": "micro_col_size",
    "Yg": "micro_line_size",
    "Yh": "number_of_pins",
    "Yi": "output_res_char",
    "Yj": "output_res_line",
    "Yk": "output_res_horz_inch",
    "Yl": "output_res_vert_inch",
    "Ym": "print_rate",
    "Yn": "wide_char_size",
    "BT": "buttons",
    "Yo": "bit_image_entwining",
    "Yp": "bit_image_type",
    "ug": "magic_cookie_glitch_ul",
    "dC": "carriage_return_delay",
    "dN": "new_line_delay",
    "dB": "backspace_delay",
    "dT": "horizontal_tab_delay",
    "kn": "number_of_function_keys",
}

STRING_ALIASES: Dict[str, str] = {
    "bt": "back_tab",
    "bl": "bell",
    "cr": "carriage_return",
    "cs": "change_scroll_region",
    "ct": "clear_all_tabs",
    "cl": "clear_screen",
    "ce": "clr_eol",
    "cd": "clr_eos",
    "ch": "column_address",
    "CC": "command_character",
    "cm": "cursor_address",
    "do": "cursor_down",
    "ho": "cursor_home",
    "vi": "cursor_invisible",
    "le": "cursor_left",
    "CM": "cursor_mem_address",
    "ve": "cursor_normal",
    "nd": "cursor_right",
    "ll": "cursor_to_ll",
    "up": "cursor_up",
    "vs": "cursor_visible",
    "dc": "delete_character",
    "dl": "delete_line",
    "ds": "dis_status_line",
    "hd": "down_half_line",
    "as": "enter_alt_charset_mode",
    "mb": "enter_blink_mode",
    "md": "enter_bold_mode",
    "ti": "enter_ca_mode",
    "dm": "enter_delete_mode",
    "mh": "enter_dim_mode",
    "im": "enter_insert_mode",
    "mk": "enter_secure_mode",
    "mp": "enter_protected_mode",
    "mr": "enter_reverse_mode",
    "so": "enter_standout_mode",
    "us": "enter_underline_mode",
    "ec": "erase_chars",
    "ae": "exit_alt_charset_mode",
    "me": "exit_attribute_mode",
    "te": "exit_ca_mode",
    "ed": "exit_delete_mode",
    "ei": "exit_insert_mode",
    "se": "exit_standout_mode",
    "ue": "exit_underline_mode",
    "vb": "flash_screen",
    "ff": "form_feed",
    "fs": "from_status_line",
    "i1": "init_1string",
    "is": "init_2string",
    "i3": "init_3string",
    "if": "init_file",
    "ic": "insert_character",
    "al": "insert_line",
    "ip": "insert_padding",
    "kb": "key_backspace",
    "ka": "key_catab",
    "kC": "key_clear",
    "kt": "key_ctab",
    "kD": "key_dc",
    "kL": "key_dl",
    "kd": "key_down",
    "kM": "key_eic",
    "kE": "key_eol",
    "kS": "key_eos",
    "k0": "key_f0",
    "k1": "key_f1",
    "k;": "key_f10",
    "k2": "key_f2",
    "k3": "key_f3",
    "k4": "key_f4",
    "k5": "key_f5",
    "k6": "key_f6",
    "k7": "key_f7",
    "k8": "key_f8",
    "k9": "key_f9",
    "kh": "key_home",
    "kI": "key_ic",
    "kA": "key_il",
    "kl": "key_left",
    "kH": "key_ll",
    "kN": "key_npage",
    "kP": "key_ppage",
    "kr": "key_right",
    "kF": "key_sf",
    "kR": "key_sr",
    "kT": "key_stab",
    "ku": "key_up",
    "ke": "keypad_local",
    "ks": "keypad_xmit",
    "l0": "lab_f0",
    "l1": "lab_f1",
    "la": "lab_f10",
    "l2": "lab_f2",
    "l3": "lab_f3",
    "l4": "lab_f4",
    "l5": "lab_f5",
    "l6": "lab_f6",
    "l7": "lab_f7",
    "l8": "lab_f8",
    "l9": "lab_f9",
    "mo": "meta_off",
    "mm": "meta_on",
    "nw": "newline",
    "pc": "pad_char",
    "DC": "parm_dch",
    "DL": "parm_delete_line",
    "DO": "parm_down_cursor",
    "IC": "parm_ich",
    "SF": "parm_index",
    "AL": "parm_insert_line",
    "LE": "parm_left_cursor",
    "RI": "parm_right_cursor",
    "SR": "parm_rindex",
    "UP": "parm_up_cursor",
    "pk": "pkey_key",
    "pl": "pkey_local",
    "px": "pkey_xmit",
    "ps": "print_screen",
    "pf": "prtr_off",
    "po": "prtr_on",
    "rp": "repeat_char",
    "r1": "reset_1string",
    "r2": "reset_2string",
    "r3": "reset_3string",
    "rf": "reset_file",
    "rc": "restore_cursor",
    "cv": "row_address",
    "sc": "save_cursor",
    "sf": "scroll_forward",
    "sr": "scroll_reverse",
    "sa": "set_attributes",
    "st": "set_tab",
    "wi": "set_window",
    "ta": "tab",
    "ts": "to_status_line",
    "uc": "underline_char",
    "hu": "up_half_line",
    "iP": "init_prog",
    "K1": "key_a1",
    "K3": "key_a3",
    "K2": "key_b2",
    "K4": "key_c1",
    "K5": "key_c3",
    "pO": "prtr_non",
    "rP": "char_padding",
    "ac": "acs_chars",
    "pn": "plab_norm",
    "kB": "key_btab",
    "SX": "enter_xon_mode",
    "RX": "exit_xon_mode",
    "SA": "enter_am_mode",
    "RA": "exit_am_mode",
    "XN": "xon_character",
    "XF": "xoff_character",
    "eA": "ena_acs",
    "LO": "label_on",
    "LF": "label_off",
    "@1": "key_beg",
    "@2": "key_cancel",
    "@3": "key_close",
    "@4": "key_command",
    "@5": "key_copy",
    "@6": "key_create",
    "@7": "key_end",
    "@8": "key_enter",
    "@9": "key_exit",
    "@0": "key_find",
    "%1": "key_help",
    "%2": "key_mark",
    "%3": "key_message",
    "%4": "key_move",
    "%5": "key_next",
    "%6": "key_open",
    "%7": "key_options",
    "%8": "key_previous",
    "%9": "key_print",
    "%0": "key_redo",
    "&1": "key_reference",
    "&2": "key_refresh",
    "&3": "key_replace",
    "&4": "key_restart",
    "&5": "key_resume",
    "&6": "key_save",
    "&7": "key_suspend",
    "&8": "key_undo",
    "&9": "key_sbeg",
    "&0": "key_scancel",
    "*1": "key_scommand",
    "*2": "key_scopy",
    "*3": "key_screate",
    "*4": "key_sdc",
    "*5": "key_sdl",
    "*6": "key_select",
    "*7": "key_send",
    "*8": "key_seol",
    "*9": "key_sexit",
    "*0": "key_sfind",
    "#1": "key_shelp",
    "#2": "key_shome",
    "#3": "key_sic",
    "#4": "key_sleft",
    "%a": "key_smessage",
    "%b": "key_smove",
    "%c": "key_snext",
    "%d": "key_soptions",
    "%e": "key_sprevious",
    "%f": "key_sprint",
    "%g": "key_sredo",
    "%h": "key_sreplace",
    "%i": "key_sright",
    "%j": "key_srsume",
    "!1": "key_ssave",
    "!2": "key_ssuspend",
    "!3": "key_sundo",
    "RF": "req_for_input",
    "F1": "key_f11",
    "F2": "key_f12",
    "F3": "key_f13",
    "F4": "key_f14",
    "F5": "key_f15",
    "F6": "key_f16",
    "F7": "key_f17",
    "F8": "key_f18",
    "F9": "key_f19",
    "FA": "key_f20",
    "FB": "key_f21",
    "FC": "key_f22",
    "FD": "key_f23",
    "FE": "key_f24",
    "FF": "key_f25",
    "FG": "key_f26",
    "FH": "key_f27",
    "FI": "key_f28",
    "FJ": "key_f29",
    "FK": "key_f30",
    "FL": "key_f31",
    "FM": "key_f32",
    "FN": "key_f33",
    "FO": "key_f34",
    "FP": "key_f35",
    "FQ": "key_f36",
    "FR": "key_f37",
    "FS": "key_f38",
    "FT": "key_f39",
    "FU": "key_f40",
    "FV": "key_f41",
    "FW": "key_f42",
    "FX": "key_f43",
    "FY": "key_f44",
    "FZ": "key_f45",
    "Fa": "key_f46",
    "Fb": "key_f47",
    "Fc": "key_f48",
    "Fd": "key_f49",
    "Fe": "key_f50",
    "Ff": "key_f51",
    "Fg": "key_f52",
    "Fh": "key_f53",
    "Fi": "key_f54",
    "Fj": "key_f55",
    "Fk": "key_f56",
    "Fl": "key_f57",
    "Fm": "key_f58",
    "Fn": "key_f59",
    "Fo": "key_f60",
    "Fp": "key_f61",
    "Fq": "key_f62",
    "Fr": "key_f63",
    "cb": "clr_bol",
    "MC": "clear_margins",
    "ML": "set_left_margin",
    "MR": "set_right_margin",
    "Lf": "label_format",
    "SC": "set_clock",
    "DK": "display_clock",
    "RC": "remove_clock",
    "CW": "create_window",
    "WG": "goto_window",
    "HU": "hangup",
    "DI": "dial_phone",
    "QD": "quick_dial",
    "TO": "tone",
    "PU": "pulse",
    "fh": "flash_hook",
    "PA": "fixed_pause",
    "WA": "wait_tone",
    "u0": "user0",
    "u1": "user1",
    "u2": "user2",
    "u3": "user3",
    "u4": "user4",
    "u5": "user5",
    "u6": "user6",
    "u7": "user7",
    "u8": "user8",
    "u9": "user9",
    "op": "orig_pair",
    "oc": "orig_colors",
    "Ic": "initialize_color",
    "Ip": "initialize_pair",
    "sp": "set_color_pair",
    "Sf": "set_foreground",
    "Sb": "set_background",
    "ZA": "change_char_pitch",
    "ZB": "change_line_pitch",
    "ZC": "change_res_horz",
    "ZD": "change_res_vert",
    "ZE": "define_char",
    "ZF": "enter_doublewide_mode",
    "ZG": "enter_draft_quality",
    "ZH": "enter_italics_mode",
    "ZI": "enter_leftward_mode",
    "ZJ": "enter_micro_mode",
    "ZK": "enter_near_letter_quality",
    "ZL": "enter_normal_quality",
    "ZM": "enter_shadow_mode",
    "ZN": "enter_subscript_mode",
    "ZO": "enter_superscript_mode",
    "ZP": "enter_upward_mode",
    "ZQ": "exit_doublewide_mode",
    "ZR": "exit_italics_mode",
    "ZS": "exit_leftward_mode",
    "ZT": "exit_micro_mode",
    "ZU": "exit_shadow_mode",
    "ZV": "exit_subscript_mode",
    "ZW": "exit_superscript_mode",
    "ZX": "exit_upward_mode",
    "ZY": "micro_column_address",
    "ZZ": "micro_down",
    "Za": "micro_left",
    "Zb": "micro_right",
    "Zc": "micro_row_address",
    "Zd": "micro_up",
    "Ze": "order_of_pins",
    "Zf": "parm_down_micro",
    "Zg": "parm_left_micro",
    "Zh": "parm_right_micro",
    "Zi": "parm_up_micro",
    "Zj": "select_char_set",
    "Zk": "set_bottom_margin",
    "Zl": "set_bottom_margin_parm",
    "Zm": "set_left_margin_parm",
    "Zn": "set_right_margin_parm",
    "Zo": "set_top_margin",
    "Zp": "set_top_margin_parm",
    "Zq": "start_bit_image",
    "Zr": "start_char_set_def",
    "Zs": "stop_bit_image",
    "Zt": "stop_char_set_def",
    "Zu": "subscript_characters",
    "Zv": "superscript_characters",
    "Zw": "these_cause_cr",
    "Zx": "zero_motion",
    "Zy": "char_set_names",
    "Km": "key_mouse",
    "Mi": "mouse_info",
    "RQ": "req_mouse_pos",
    "Gm": "get_mouse",
    "AF": "set_a_foreground",
    "AB": "set_a_background",
    "xl": "pkey_plab",
    "dv": "device_type",
    "ci": "code_set_init",
    "s0": "set0_des_seq",
    "s1": "set1_des_seq",
    "s2": "set2_des_seq",
    "s3": "set3_des_seq",
    # set_lr_margin shares "ML" with set_left_margin and has no code of its own here
    "MT": "set_tb_margin",
    "Xy": "bit_image_repeat",
    "Zz": "bit_image_newline",
    "Yv": "bit_image_carriage_return",
    "Yw": "color_names",
    "Yx": "define_bit_image_region",
    "Yy": "end_bit_image_region",
    "Yz": "set_color_band",
    "YZ": "set_page_length",
    "S1": "display_pc_char",
    "S2": "enter_pc_charset_mode",
    "S3": "exit_pc_charset_mode",
    "S4": "enter_scancode_mode",
    "S5": "exit_scancode_mode",
    "S6": "pc_term_options",
    "S7": "scancode_escape",
    "S8": "alt_scancode_esc",
    "Xh": "enter_horizontal_hl_mode",
    "Xl": "enter_left_hl_mode",
    "Xo": "enter_low_hl_mode",
    "Xr": "enter_right_hl_mode",
    "Xt": "enter_top_hl_mode",
    "Xv": "enter_vertical_hl_mode",
    "sA": "set_a_attributes",
    "YI": "set_pglen_inch",
    "i2": "termcap_init2",
    "rs": "termcap_reset",
    "nl": "linefeed_if_not_lf",
    "bc": "backspace_if_not_bs",
    "ko": "other_non_function_keys",
    "ma": "arrow_key_map",
    "G2": "acs_ulcorner",
    "G3": "acs_llcorner",
    "G1": "acs_urcorner",
    "G4": "acs_lrcorner",
    "GR": "acs_ltee",
    "GL": "acs_rtee",
    "GU": "acs_btee",
    "GD": "acs_ttee",
    "GH": "acs_hline",
    "GV": "acs_vline",
    "GC": "acs_plus",
    "ml": "memory_lock",
    "mu": "memory_unlock",
    "bx": "box_chars_1",
}
